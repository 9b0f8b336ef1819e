"""Interlinear passage rendering over a tokenized, annotated corpus."""
