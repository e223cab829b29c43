import os
from dotenv import load_dotenv

load_dotenv()

config = {
    'recent_window_hours': int(os.getenv('VAULTGRAPH_RECENT_WINDOW_HOURS', 24)),
    'recent_limit': int(os.getenv('VAULTGRAPH_RECENT_LIMIT', 20)),
    'archive_dir': os.getenv('VAULTGRAPH_ARCHIVE_DIR', 'tasks/archive'),
    'mock_date': os.getenv('VAULTGRAPH_MOCK_DATE'),
}
