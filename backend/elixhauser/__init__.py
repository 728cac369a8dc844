"""Elixhauser comorbidity composite score service."""
