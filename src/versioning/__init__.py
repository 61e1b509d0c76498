"""SDK version model, parsing and resolution rules."""
