"""Fantasy football draft assistant: projections, grades and snake-draft tracking."""
