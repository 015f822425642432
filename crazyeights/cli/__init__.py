"""Command-line front-ends for the Crazy Eights engine."""
