"""
License Server Django project.
"""
