"""Backgammon rules engine with a Monte-Carlo Tree Search opponent."""
