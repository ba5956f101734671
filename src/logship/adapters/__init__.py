"""Adapters binding the core to logging, HTTP and context propagation."""
