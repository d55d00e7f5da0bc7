"""Telegram front-end for the RAWG game catalog."""
