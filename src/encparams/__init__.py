"""Encoder parameter parsing: registry, tokenizer, dispatcher, probe, and checks."""
