"""Virtual policy routing and overload shedding for an LLM gateway."""
