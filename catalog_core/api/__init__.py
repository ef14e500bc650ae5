"""HTTP API for the catalog core"""
