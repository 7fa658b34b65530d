"""Fixtures shared by the tests of the tree layer."""

import pytest

from studytree.tree.models import MoveNode, MoveTree


@pytest.fixture
def sample_tree(make_move) -> MoveTree:
    """
    1. e4 e5 2. Nf3              main line
         2. Nc3 Nf6              branch 0 on e5         -> (1, 0, k)
                  3. Bc4         branch 0 on ...Nf6     -> (1, 0, 1, 0, 0)
    1. d4 d5                     root branch 0          -> (-1, 0, k)
    """
    bishop = MoveNode(make_move("f1", "c4", "Bc4"))
    knight_f6 = MoveNode(make_move("g8", "f6", "Nf6", color="b"), branches=((bishop,),))
    knight_c3 = MoveNode(make_move("b1", "c3", "Nc3"))
    main_line = (
        MoveNode(make_move("e2", "e4", "e4")),
        MoveNode(make_move("e7", "e5", "e5", color="b"), branches=((knight_c3, knight_f6),)),
        MoveNode(make_move("g1", "f3", "Nf3")),
    )
    root_branch = (
        MoveNode(make_move("d2", "d4", "d4")),
        MoveNode(make_move("d7", "d5", "d5", color="b")),
    )
    return MoveTree(main_line=main_line, root_branches=(root_branch,))
