"""llmx - a small command-line client for LLM HTTP APIs"""
