"""Toolkit limits and per-call execution context."""