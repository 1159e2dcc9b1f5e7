"""Default pipeline settings."""

DEFAULTS = {
    "model": "claude-sonnet-4-5-20250929",
    "max_tokens": 32768,
    "previous_prompts_limit": 5,
    "listing_char_ceiling": 300_000,        # file listing inside the system prompt
    "user_message_char_ceiling": 250_000,   # file blocks appended to the user message
    "store_path": "buildflow_projects.json",
}
