"""LikenessAI service."""
