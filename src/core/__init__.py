"""
Core business logic for program generation.

This module is framework-agnostic - it doesn't import FastAPI, httpx, or
any vendor SDK. This separation means we can test the mapping, prompt and
rendering logic in isolation and swap vendors if needed.
"""
