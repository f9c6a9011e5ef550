"""Tests for the Snake module."""

from collections import deque

from canvas_snake.snake import Direction, Snake


class TestDirection:
    def test_unit_vectors(self):
        assert Direction.UP.value == (0, -1)
        assert Direction.DOWN.value == (0, 1)
        assert Direction.LEFT.value == (-1, 0)
        assert Direction.RIGHT.value == (1, 0)

    def test_components(self):
        assert (Direction.LEFT.dx, Direction.LEFT.dy) == (-1, 0)


class TestSnakeInit:
    def test_single_cell(self):
        snake = Snake((3, 4))
        assert len(snake) == 1
        assert snake.head == (3, 4)
        assert snake.tail == (3, 4)
        assert snake.head_is_tail is True

    def test_contains(self):
        snake = Snake((1, 1))
        assert (1, 1) in snake
        assert (1, 2) not in snake


class TestHeadTailRoles:
    def test_head_is_last_by_default(self):
        snake = Snake((0, 0))
        snake.push_head((1, 0))
        snake.push_head((2, 0))
        assert snake.head == (2, 0)
        assert snake.tail == (0, 0)
        assert list(snake.path) == [(0, 0), (1, 0), (2, 0)]

    def test_pop_tail_removes_opposite_end(self):
        snake = Snake((0, 0))
        snake.push_head((1, 0))
        assert snake.pop_tail() == (0, 0)
        assert list(snake.path) == [(1, 0)]

    def test_reverse_swaps_roles_without_moving_cells(self):
        snake = Snake((0, 0))
        snake.push_head((1, 0))
        snake.push_head((2, 0))
        snake.reverse()
        assert snake.head == (0, 0)
        assert snake.tail == (2, 0)
        assert list(snake.path) == [(0, 0), (1, 0), (2, 0)]

    def test_push_and_pop_after_reverse(self):
        snake = Snake((0, 0))
        snake.path = deque([(1, 0), (2, 0)])
        snake.reverse()
        snake.push_head((0, 0))
        assert snake.head == (0, 0)
        assert snake.pop_tail() == (2, 0)
        assert list(snake.path) == [(0, 0), (1, 0)]

    def test_body_excludes_ends(self):
        snake = Snake((0, 0))
        for x in range(1, 4):
            snake.push_head((x, 0))
        assert snake.body() == [(1, 0), (2, 0)]

    def test_reseed(self):
        snake = Snake((0, 0))
        snake.push_head((1, 0))
        snake.reverse()
        snake.reseed((5, 5))
        assert list(snake.path) == [(5, 5)]
        assert snake.head_is_tail is True


class TestSnakeSerialization:
    def test_to_dict(self):
        snake = Snake((0, 0))
        snake.push_head((1, 0))
        d = snake.to_dict()
        assert d["path"] == [[0, 0], [1, 0]]
        assert d["head"] == [1, 0]
        assert d["tail"] == [0, 0]
        assert d["head_is_tail"] is True
