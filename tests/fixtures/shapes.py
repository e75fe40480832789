"""Sample module scanned and imported by the test suite."""

from hurry import shorthand


@shorthand
class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y

    @classmethod
    def new(cls, x, y):
        return cls(x, y)

    @staticmethod
    def origin():
        return Point(0, 0)

    def __eq__(self, other):
        return isinstance(other, Point) and (self.x, self.y) == (other.x, other.y)


@shorthand
class HTTPServer:
    def __init__(self, port):
        self.port = port

    @classmethod
    def new(cls, port):
        return cls(port)


@shorthand
class Polygon:
    def __init__(self, points):
        self.points = list(points)

    @staticmethod
    def new(*points):
        return Polygon(points)


@shorthand(wrapper="arc_mutex")
class Counter:
    def __init__(self):
        self.count = 0

    @classmethod
    def new(cls):
        return cls()


class Internal:
    @classmethod
    def new(cls):
        return cls()
