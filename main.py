"""
chatrelay: OpenAI-compatible chat gateway with model-specific prompt templates

Main entry point for the application.
"""

from chatrelay.server import main


if __name__ == "__main__":
    main()
