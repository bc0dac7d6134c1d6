"""
Services package — business logic layer.

  - auth_service: password + Google sign-in, JWT issue/decode
  - article_service: partial updates with version snapshots
  - workflow_service: role-gated status transitions
  - notification_service: inbox fan-out for workflow events
  - live_update_service: in-memory SSE broker per article
  - llm_service: OpenAI / Groq chat completions with fallback
  - ai_service: research, writing, fact-check, editorial agents
  - image_service: Unsplash photo search
  - page_fetch_service: title + text preview for source URLs
"""
