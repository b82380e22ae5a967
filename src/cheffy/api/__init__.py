"""HTTP API for the Cheffy recipe-step extractor."""
