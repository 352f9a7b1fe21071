"""El Arte de Sanar editable content service."""
