"""
AI service — newsroom agents built on the LLM service.

Agents:
  - research(): plain-text research report on a topic
  - write_article(): full article draft from a brief
  - fact_check(): JSON verdict on a single claim
  - editorial_review(): editor's critique of a draft
  - generate_caption(): one or two sentence photo caption
  - assess_source(): credibility assessment of a web source

Each agent builds its prompt, calls llm_service.complete() (OpenAI first,
Groq fallback) and post-processes the text. Agents return a dict shaped
for the API response; provider failures propagate as LLMAPIError.
"""
import json
import logging
import re

from flask import current_app

from services import llm_service
from services.page_fetch_service import fetch_page

logger = logging.getLogger(__name__)

MAX_CLAIM_CHARS = 3000
SOURCE_SAMPLE_CHARS = 500

RESEARCH_SYSTEM = (
    "You are an expert research journalist specializing in fact-finding "
    "and source verification."
)
WRITER_SYSTEM = "You are an award-winning journalist and content writer."
FACT_CHECK_SYSTEM = (
    "You are a fact-checker for a major news organization. Be thorough and "
    "cite sources. Always respond with valid JSON only, no markdown."
)
EDITOR_SYSTEM = "You are a senior editor at a prestigious news publication."
CAPTION_SYSTEM = "You are a photo editor writing captions for news images."
CREDIBILITY_SYSTEM = "You are a media literacy expert assessing source credibility."


class AIResponseError(ValueError):
    """Raised when a model reply cannot be turned into the expected shape."""


# ---------------------------------------------------------------------------
# Text / JSON post-processing
# ---------------------------------------------------------------------------

_FENCE_RE = re.compile(r"```\w*\n?")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


def strip_code_fences(text):
    """Remove markdown code fences and stray backticks."""
    text = _FENCE_RE.sub("", text or "")
    return text.replace("`", "").strip()


def slice_json_object(text):
    """Cut text down to the span between the first '{' and the last '}'."""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        return text[start:end + 1]
    return text


def repair_json(text):
    """Drop trailing commas and flatten control whitespace."""
    text = _TRAILING_COMMA_RE.sub(r"\1", text)
    return text.replace("\n", " ").replace("\r", "").replace("\t", " ")


def parse_model_json(text):
    """
    Parse a JSON object out of a model reply.

    Strips fences, slices the outermost object, and retries once after
    repair_json() if the first parse fails.

    Raises:
        AIResponseError: if the text cannot be parsed even after repair.
    """
    cleaned = slice_json_object(strip_code_fences(text))
    try:
        return json.loads(cleaned)
    except ValueError as first_exc:
        logger.warning("[--] JSON parse failed, attempting repair: %s", first_exc)
        try:
            return json.loads(repair_json(cleaned))
        except ValueError as exc:
            logger.error("[ERR] Could not repair model JSON: %s", exc)
            raise AIResponseError(f"Invalid JSON from AI: {exc}")


def extract_trailing_json(text):
    """Parse JSON starting at the first '{', or None if that fails."""
    start = text.find("{")
    if start == -1:
        return None
    try:
        return json.loads(text[start:])
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Agents
# ---------------------------------------------------------------------------

def research(topic, keywords=None):
    """Gather facts, perspectives, context and suggested sources."""
    keywords = keywords or []
    focus = f"Focus on these aspects: {', '.join(keywords)}" if keywords else ""
    prompt = f"""As a research journalist, provide comprehensive research about: "{topic}"
{focus}

Provide PLAIN TEXT research report with:

KEY FACTS AND STATISTICS:
- List important facts and data points

DIFFERENT PERSPECTIVES:
- Present various viewpoints on the topic

IMPORTANT CONTEXT:
- Background information and context

SUGGESTED CREDIBLE SOURCES:
- List reputable sources to investigate further

Format as PLAIN TEXT ONLY (no JSON, no code blocks). Write it as a readable research report."""

    text, usage = llm_service.complete(
        RESEARCH_SYSTEM, prompt, temperature=0.7, max_tokens=2000,
    )
    logger.info("[OK] Research agent finished: %s", topic[:80])
    return {"data": text, "usage": usage}


def _sources_context(sources):
    if not sources:
        return ""
    lines = [
        f"{i}. {s.get('title') or ''} - {s.get('summary') or ''}"
        for i, s in enumerate(sources, start=1)
    ]
    return "\n\nReference these sources:\n" + "\n".join(lines)


def write_article(brief, sources=None, style="professional"):
    """Draft a full article. JSON replies are normalized, prose is kept as is."""
    prompt = f"""Write a complete news article based on this brief: "{brief}"{_sources_context(sources)}

Style: {style}

Requirements:
- Start with a clear, engaging headline on the first line
- Write a strong lead paragraph
- Include well-structured body with multiple paragraphs (at least 5-6 paragraphs)
- Use **bold text** for section headings and subheadings
- Add relevant quotes if sources are provided
- Maintain journalistic objectivity and fact-based reporting
- Make it comprehensive and detailed

Format as PLAIN TEXT with markdown-style formatting:
- First line: **Bold Headline**
- Blank line
- Lead paragraph (2-3 sentences)
- Blank line
- **Bold Subheading 1**
- Body paragraphs (2-3 paragraphs)
- Blank line
- **Bold Subheading 2**
- More body paragraphs (2-3 paragraphs)
- Include quotes in "double quotes"
- Separate all paragraphs with blank lines for readability

Use **bold** for headings by wrapping text in double asterisks. Write a detailed, well-structured article with clear sections."""

    text, usage = llm_service.complete(
        WRITER_SYSTEM, prompt, temperature=0.8, max_tokens=3000,
        model=current_app.config.get("OPENAI_WRITING_MODEL"),
    )
    parsed = extract_trailing_json(text)
    data = json.dumps(parsed) if parsed is not None else text
    logger.info("[OK] Writing agent finished (%d chars)", len(data))
    return {"data": data, "usage": usage}


def _parse_fact_check(text):
    """Model reply -> verdict dict with string sources."""
    parsed = parse_model_json(text)
    if not isinstance(parsed, dict):
        raise AIResponseError("Fact-check reply is not a JSON object")
    if isinstance(parsed.get("sources"), list):
        parsed["sources"] = [s if isinstance(s, str) else str(s) for s in parsed["sources"]]
    return parsed


def fact_check(claim, context=""):
    """
    Fact-check one claim.

    Returns:
        dict with data (clean JSON string), parsed (dict) and usage.

    Raises:
        AIResponseError: if neither provider gives usable JSON.
    """
    limited_claim = (claim or "")[:MAX_CLAIM_CHARS]
    context_line = f"\nContext: {context}" if context else ""
    prompt = f"""Fact-check this claim: "{limited_claim}"
{context_line}

Provide:
1. Verdict (true/false/partially-true/unverified)
2. Explanation (detailed)
3. Confidence level (0-1)
4. Sources for verification
5. Any caveats or nuances

Format as JSON with fields: verdict, explanation, confidence, sources, caveats"""

    parsed, usage = llm_service.complete(
        FACT_CHECK_SYSTEM, prompt, temperature=0.3, max_tokens=1500,
        json_mode=True, postprocess=_parse_fact_check,
    )

    logger.info("[OK] Fact-check verdict: %s", parsed.get("verdict"))
    return {"data": json.dumps(parsed), "parsed": parsed, "usage": usage}


def editorial_review(content, guidelines=None):
    """Score and critique a draft against tone/audience/length guidelines."""
    guidelines = guidelines or {}
    tone = guidelines.get("tone") or "professional"
    audience = guidelines.get("targetAudience") or "general"
    max_length = guidelines.get("maxLength")
    length_line = f"- Target Length: ~{max_length} words" if max_length else ""

    prompt = f"""Review and improve this article content:

{content}

Guidelines:
- Tone: {tone}
- Target Audience: {audience}
{length_line}

Provide:
1. Overall quality score (0-10)
2. Specific improvements needed
3. Revised content (if applicable)
4. SEO suggestions
5. Readability score

Format as JSON."""

    text, usage = llm_service.complete(
        EDITOR_SYSTEM, prompt, temperature=0.5, max_tokens=2500,
        model=current_app.config.get("OPENAI_WRITING_MODEL"),
    )
    return {"data": text, "usage": usage}


def generate_caption(image_description, article_context=""):
    context_line = f"\nArticle context: {article_context}" if article_context else ""
    prompt = f"""Generate a professional news photo caption for this image: "{image_description}"
{context_line}

Keep it concise (1-2 sentences), informative, and journalistic."""

    text, usage = llm_service.complete(
        CAPTION_SYSTEM, prompt, temperature=0.7, max_tokens=200,
        model=current_app.config.get("OPENAI_WRITING_MODEL"),
    )
    return {"caption": text.strip(), "usage": usage}


def assess_source(source_url, source_content=""):
    """Assess credibility; fetches the page when no content sample is given."""
    if not source_content:
        page = fetch_page(source_url)
        if page:
            source_content = f"{page['title']}\n{page['text']}".strip()

    prompt = f"""Assess the credibility of this news source:
URL: {source_url}
Content Sample: {(source_content or '')[:SOURCE_SAMPLE_CHARS]}

Evaluate:
1. Publisher reputation
2. Author expertise
3. Citation quality
4. Bias indicators
5. Overall credibility score (0-1)

Format as JSON."""

    text, usage = llm_service.complete(
        CREDIBILITY_SYSTEM, prompt, temperature=0.3, max_tokens=800,
        model=current_app.config.get("OPENAI_WRITING_MODEL"),
    )
    return {"data": text, "usage": usage}


def generate_image_dalle(description, style="photorealistic"):
    prompt = f"{description}. Style: {style}, news photography, high quality, professional"
    return llm_service.generate_dalle_image(prompt)
