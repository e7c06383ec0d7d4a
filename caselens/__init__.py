"""caselens: chunked LLM analysis of free-text case histories."""
