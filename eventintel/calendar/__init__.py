"""Pure calendar intelligence: classification, surprise scoring, analysis
validation, time windows and cross-source matching."""
