"""Services used by the twig orchestrator."""
