"""Integration tests for the XML editor.

These tests exercise several packages together: markup editing followed by
revision insertion, round trips of the bundled sample documents, and the AI
loop through an in-process gateway whose Bedrock runtime is mocked.
"""
