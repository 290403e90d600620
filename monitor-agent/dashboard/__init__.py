"""Cliente de terminal que acompanha o endpoint /api/metrics."""
