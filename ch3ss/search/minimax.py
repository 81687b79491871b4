"""
Minimax Search with Alpha-Beta Pruning

This module implements the core search algorithm for the engine.
Minimax explores the game tree to find the best move, and alpha-beta
pruning skips branches that cannot change the result.

Score Convention:
    Scores are always from White's perspective. The maximizing side is
    fixed for the whole tree (normally White maximizes and Black
    minimizes); the flag alternates at every ply. Only quiescence search,
    at the leaves, works relative to the side to move.

Key Concepts:
    - Alpha-Beta: Prune once the window [alpha, beta] closes
    - Transposition Table: Reuse results searched at least as deep
    - Move Ordering: TT move, captures, killers, then quiet moves
    - Quiescence: Resolve captures at the horizon before evaluating

References:
    - Minimax: https://www.chessprogramming.org/Minimax
    - Alpha-Beta: https://www.chessprogramming.org/Alpha-Beta
"""

import logging
import chess
from typing import Callable, List, Optional, Tuple

from ch3ss.board.representation import is_draw_by_rule, is_terminal
from ch3ss.evaluation.base import Evaluator, INFINITY
from ch3ss.search.ordering import order_moves
from ch3ss.search.quiescence import quiesce
from ch3ss.search.session import SearchAborted, SearchSession, SearchStats
from ch3ss.search.transposition import NodeType, zobrist_hash

logger = logging.getLogger(__name__)


def _node_type(value: int, alpha: int, beta: int) -> NodeType:
    """Classify a result against the window it was searched with."""
    if value <= alpha:
        return NodeType.UPPER_BOUND
    if value >= beta:
        return NodeType.LOWER_BOUND
    return NodeType.EXACT


def minimax(
    board: chess.Board,
    depth: int,
    alpha: int,
    beta: int,
    maximizing_player: bool,
    evaluator: Evaluator,
    session: SearchSession,
    ply_from_root: int = 0,
) -> int:
    """
    Minimax search with alpha-beta pruning.

    Args:
        board: Current chess position (restored before returning)
        depth: Remaining search depth
        alpha: Best score the maximizer is assured of
        beta: Best score the minimizer is assured of
        maximizing_player: True if the side to move maximizes the score
        evaluator: Position evaluation function
        session: Transposition table, killers, statistics and budget
        ply_from_root: Distance from root (selects killer slots)

    Returns:
        int: Evaluation of the position in centipawns (White's perspective)

    Algorithm:
        1. Probe the transposition table; reuse a deep-enough entry
        2. Leaf (depth <= 0 or game over): quiescence search
        3. Otherwise, for each ordered move:
            a. Make move, search depth - 1 with the other flag, undo
            b. Update best score and alpha (or beta)
            c. On beta <= alpha, remember quiet move as killer and stop
        4. Store the result and its bound type

    Note:
        The Zobrist key covers placement, side to move, castling and en
        passant only. Nodes drawn by the fifty-move rule or by repetition
        are neither read from nor written to the table. Interior entries
        can still reflect a repetition or clock found below them, so a
        later hit on the same placement with a different history may be
        off by that draw.
    """
    session.count_node()

    table = session.transposition_table
    key = zobrist_hash(board)

    # The key has no halfmove clock or history
    drawn_by_rule = is_draw_by_rule(board)

    entry = None if drawn_by_rule else table.lookup(key, depth)
    if entry is not None:
        if (
            entry.node_type == NodeType.EXACT
            or (entry.node_type == NodeType.LOWER_BOUND and entry.value >= beta)
            or (entry.node_type == NodeType.UPPER_BOUND and entry.value <= alpha)
        ):
            session.stats.tt_hits += 1
            return entry.value

    if depth <= 0 or is_terminal(board):
        # Quiescence works from the side to move's point of view
        if board.turn == chess.WHITE:
            relative = quiesce(
                board, alpha, beta, evaluator, session, 0, session.max_quiescence_plies
            )
            value = relative
        else:
            relative = quiesce(
                board, -beta, -alpha, evaluator, session, 0, session.max_quiescence_plies
            )
            value = -relative

        if not drawn_by_rule:
            table.store(key, depth, value, _node_type(value, alpha, beta))
        return value

    # A shallower entry still tells us which move to try first
    cached = entry if entry is not None else table.probe(key)
    tt_move = cached.best_move if cached is not None else None

    ordered_moves = order_moves(board, board.legal_moves, ply_from_root, session, tt_move)

    original_alpha, original_beta = alpha, beta
    best_move = None

    if maximizing_player:
        best_score = -INFINITY
        for move in ordered_moves:
            board.push(move)
            try:
                score = minimax(
                    board, depth - 1, alpha, beta, False,
                    evaluator, session, ply_from_root + 1,
                )
            finally:
                board.pop()

            if score > best_score:
                best_score = score
                best_move = move
            alpha = max(alpha, score)

            # Beta cutoff: minimizing player won't allow this branch
            if beta <= alpha:
                if not board.is_capture(move):
                    session.killers.store(ply_from_root, move)
                break
    else:
        best_score = INFINITY
        for move in ordered_moves:
            board.push(move)
            try:
                score = minimax(
                    board, depth - 1, alpha, beta, True,
                    evaluator, session, ply_from_root + 1,
                )
            finally:
                board.pop()

            if score < best_score:
                best_score = score
                best_move = move
            beta = min(beta, score)

            # Alpha cutoff: maximizing player won't allow this branch
            if beta <= alpha:
                if not board.is_capture(move):
                    session.killers.store(ply_from_root, move)
                break

    table.store(
        key,
        depth,
        best_score,
        _node_type(best_score, original_alpha, original_beta),
        best_move,
    )
    return best_score


def find_best_move(
    board: chess.Board,
    depth: int,
    evaluator: Evaluator,
    session: Optional[SearchSession] = None,
    side: Optional[chess.Color] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> Tuple[Optional[chess.Move], int, SearchStats]:
    """
    Find the best move in the current position.

    Args:
        board: Current chess position (left unchanged)
        depth: Search depth in plies (>= 1)
        evaluator: Position evaluation function
        session: Search state to reuse (a fresh one is created if None)
        side: Maximizing side designation, defaults to the side to move.
            WHITE maximizes the White-positive score, BLACK minimizes it.
        should_stop: Polled at every node; returning True aborts the search

    Returns:
        Tuple of (best_move, score, stats)
            - best_move: The best move found, None if there are no legal moves
            - score: Score of the best move (White's perspective)
            - stats: Node counts, TT hits and timing of this search

    Root moves are searched in order with a narrowing window: alpha for a
    maximizing root, beta for a minimizing one. Only strictly better scores
    replace the current best, so the first of equal moves wins.

    If the node budget or stop callback interrupts the search, the best of
    the fully searched root moves is returned (the first ordered move if
    none finished).
    """
    if depth < 1:
        raise ValueError(f"depth must be at least 1, got {depth}")

    if session is None:
        session = SearchSession()
    if side is None:
        side = board.turn
    maximizing = side == chess.WHITE

    session.begin(should_stop)

    legal_moves = list(board.legal_moves)
    if not legal_moves:
        stats = session.finish()
        score = evaluator.evaluate_terminal(board)
        logger.info(f"No legal moves (score={score}), nothing to search")
        return None, score if score is not None else 0, stats

    root_key = zobrist_hash(board)
    cached = session.transposition_table.probe(root_key)
    tt_move = cached.best_move if cached is not None else None
    ordered_moves = order_moves(board, legal_moves, 0, session, tt_move)

    best_move = None
    best_score = -INFINITY if maximizing else INFINITY
    alpha, beta = -INFINITY, INFINITY

    try:
        for move in ordered_moves:
            board.push(move)
            try:
                score = minimax(
                    board, depth - 1, alpha, beta, not maximizing,
                    evaluator, session, ply_from_root=1,
                )
            finally:
                board.pop()

            if maximizing:
                if score > best_score:
                    best_score = score
                    best_move = move
                alpha = max(alpha, score)
            else:
                if score < best_score:
                    best_score = score
                    best_move = move
                beta = min(beta, score)

            logger.debug(f"Root move {move.uci()}: score={score}")
    except SearchAborted as exc:
        session.stats.aborted = True
        logger.info(f"Search aborted ({exc}) after {session.stats.total_nodes} nodes")

    if best_move is None:
        best_move = ordered_moves[0]
        best_score = evaluator.evaluate(board)
    elif not session.stats.aborted:
        session.transposition_table.store(
            root_key, depth, best_score, NodeType.EXACT, best_move
        )

    stats = session.finish()
    logger.info(
        f"Search depth={depth}: best_move={best_move.uci()} score={best_score} {stats}"
    )
    return best_move, best_score, stats


def principal_variation(
    board: chess.Board,
    session: SearchSession,
    max_length: int,
) -> List[chess.Move]:
    """
    Follow best moves stored in the transposition table from `board`.

    Stops at a missing or illegal move, a repeated position or after
    `max_length` moves. The board is left unchanged.
    """
    pv: List[chess.Move] = []
    seen = set()
    pushed = 0
    try:
        while len(pv) < max_length:
            key = zobrist_hash(board)
            if key in seen:
                break
            seen.add(key)

            entry = session.transposition_table.probe(key)
            if entry is None or entry.best_move is None:
                break
            if not board.is_legal(entry.best_move):
                break

            pv.append(entry.best_move)
            board.push(entry.best_move)
            pushed += 1
    finally:
        for _ in range(pushed):
            board.pop()
    return pv
