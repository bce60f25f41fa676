"""JSON API over the parser, evaluator and correction path."""
