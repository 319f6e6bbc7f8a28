"""Parkir test suites: unit/ for single layers, integration/ for wired-up runs."""
