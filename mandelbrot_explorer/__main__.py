"""
Allow running the package directly: python -m mandelbrot_explorer
"""
from .app import main

main()
