"""Renderer adapters and render targets."""
