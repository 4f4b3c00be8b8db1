"""Test helpers: fake transports and payload builders."""
