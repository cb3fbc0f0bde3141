"""OpenAI-compatible chat completions provider."""
