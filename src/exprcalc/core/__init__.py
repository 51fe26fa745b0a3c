"""Core tokenizer, parser, evaluator and error types for exprcalc."""
