"""quiz-server: interactive quiz sessions over a line-oriented channel."""
