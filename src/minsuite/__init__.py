"""minsuite: coverage-guided test suite minimization.

Keep the tests that matter. Drop the ones that only repeat what others cover.

minsuite runs every test of a suite once under coverage.py, accumulates the
branch and statement coverage they reach on a set of target modules or
classes, and keeps only the tests that increase it. The minimized suite
reproduces the coverage of the whole suite at a fraction of the cost.

Example:
    Minimize a test class against the class it exercises::

        $ minsuite --testsuite tests.test_tree.TestTree --targets avl_tree.AvlTree -o minimized.txt

    From Python::

        >>> from minsuite import minimize
        >>> minimize(['tests.test_tree'], ['avl_tree'])  # doctest: +SKIP
        [TestCase(holder_name='tests.test_tree.TestTree', name='test_insert', ...)]
"""

from __future__ import annotations

from minsuite.engine import MinimizationEngine, minimize, minimize_suite


__version__ = '0.1.0'
__all__ = ['MinimizationEngine', '__version__', 'minimize', 'minimize_suite']
