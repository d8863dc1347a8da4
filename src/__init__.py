"""Encoder parameter parsing library."""
