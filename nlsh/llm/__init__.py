from nlsh.llm.ollama import OllamaClient, DEFAULT_URL, DEFAULT_MODEL
__all__ = ["OllamaClient", "DEFAULT_URL", "DEFAULT_MODEL"]
