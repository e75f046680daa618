"""
Input collaborators: the packaged example, console prompts and the LLM scenario generator.
"""
