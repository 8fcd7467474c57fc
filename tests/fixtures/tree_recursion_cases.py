def fib(n):
    if n == 0 or n == 1:
        return n

    fn = fib
    a = fn

    return fn(n - 1) + a(n - 2)  # want "tree recursion in call 'fib'"


def complex_func(i, j):
    if i <= 0 or j <= 0:
        return i - j

    k, n = i, j
    cf = complex_func

    return cf(cf(i - 1, j), cf(k, n - 1))  # want "tree recursion in call 'complex_func'"


class T:
    def a(self, i):
        a = self.a
        b = a
        _ = b
        return b(2) + a(2 + 1)  # want "tree recursion in call 'self.a'"

    def b(self, i):
        return self.b(2) + self.b(2 + 1)  # want "tree recursion in call 'self.b'"


def plain(i):
    return i + 1
