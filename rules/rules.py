DEFAULT_BUFFER_SIZE = 7
MIN_GRID_SIZE = 2
MIN_BUFFER_SIZE = 1

# Move ordering weights: lower scores are explored first.
COMPLETION_SCORE = -1000
PROGRESS_SCORE = -10

# OCR output marks unreadable cells with this token.
UNKNOWN_TOKEN = "??"

START_ROW = 0
FIRST_PHASE = "col"
