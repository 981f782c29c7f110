"""Document ingestion pipeline: **extract -> chunk -> embed -> store**.

1. **Extract** (text_extractor.py / TextExtractor) -- .pdf, .docx and .txt
   readers producing plain text with line structure intact.
2. **Chunk** (chunker.py / TextChunker) -- numbered section headers become
   their own chunks; body text is split into sentences.
3. **Embed** (via IEmbeddingProvider) -- one concurrent request per chunk.
4. **Store** (via IVectorStoreProvider) -- a single batch upsert.

IngestionService orchestrates the stages.
"""

from lexassist.services.ingestion.chunker import TextChunker
from lexassist.services.ingestion.ingestion_service import IngestionService
from lexassist.services.ingestion.text_extractor import TextExtractor, collapse_whitespace

__all__ = [
    "IngestionService",
    "TextChunker",
    "TextExtractor",
    "collapse_whitespace",
]
