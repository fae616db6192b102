"""Stateless helpers: coordinate math, hit testing, history, config, logging."""
