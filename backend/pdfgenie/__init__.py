"""PDF Genie — document ingestion, text extraction and AI summarization API."""
