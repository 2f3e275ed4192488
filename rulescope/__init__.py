"""
Rulescope - Build an LLM prompt for improving a project's .cursorrules.

A CLI tool that:
1. Packs the codebase with repomix
2. Resolves the project's ESLint configuration and extracts its rules
3. Detects the version of a tracked dependency from package.json
4. Writes everything into a single prompt file to paste into an LLM chat

Usage:
    rulescope init          # Write a sample rulescope.yml
    rulescope generate      # Build llm-prompt.txt
    rulescope rules         # Print the resolved ESLint rules
    rulescope sources       # Show which ESLint config candidates exist
"""

__version__ = "0.1.0"
__author__ = "Rulescope"
