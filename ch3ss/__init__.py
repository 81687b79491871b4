"""
CH3SS Chess Engine

A minimax chess engine with alpha-beta pruning, quiescence search and a
classical evaluation, built on python-chess as its rules engine.

## Architecture

1. **board**: Adapters around python-chess (terminal checks, keys, notation)

2. **evaluation**: Position evaluation
   - Evaluator interface (swappable)
   - ClassicalEvaluator: material, piece-square tables, bishop pair,
     mobility, king safety, doubled pawns, optional jitter

3. **search**: Move search
   - Minimax with alpha-beta pruning
   - Quiescence search at the horizon
   - Transposition table (Zobrist hashing) and killer moves
   - SearchSession holding all mutable search state

4. **book**: Opening book answered without searching

5. **external**: Delegation to Stockfish over UCI

6. **worker**: Message-based move requests on a background thread

7. **uci**: Universal Chess Interface front end

## Quick Start

```python
import chess
from ch3ss.evaluation import ClassicalEvaluator
from ch3ss.search import find_best_move, SearchSession

board = chess.Board()
session = SearchSession()
best_move, score, stats = find_best_move(board, 3, ClassicalEvaluator(), session)
print(f"Best move: {best_move} (score: {score}, {stats})")
```

### As a UCI Engine

```bash
python -m ch3ss.uci
```
"""

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = ['__version__']
