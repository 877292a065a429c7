"""Tests for the change notifier"""

from git_worktree_manager.services.notifier import ChangeNotifier


class TestChangeNotifier:
    """Test listener registration and broadcast."""

    def test_listeners_called_in_order(self):
        notifier = ChangeNotifier()
        calls = []
        notifier.subscribe(lambda: calls.append("first"))
        notifier.subscribe(lambda: calls.append("second"))

        notifier.notify()

        assert calls == ["first", "second"]

    def test_unsubscribe(self):
        notifier = ChangeNotifier()
        calls = []
        subscription = notifier.subscribe(lambda: calls.append("x"))

        assert subscription.active
        assert subscription.unsubscribe()
        assert not subscription.active
        assert not subscription.unsubscribe()

        notifier.notify()
        assert calls == []
        assert notifier.listener_count() == 0

    def test_subscription_context_manager(self):
        notifier = ChangeNotifier()
        with notifier.subscribe(lambda: None):
            assert notifier.listener_count() == 1
        assert notifier.listener_count() == 0

    def test_failing_listener_does_not_stop_others(self):
        notifier = ChangeNotifier()
        calls = []

        def broken():
            raise RuntimeError("boom")

        notifier.subscribe(broken)
        notifier.subscribe(lambda: calls.append("ok"))

        notifier.notify()

        assert calls == ["ok"]

    def test_listener_may_unsubscribe_itself(self):
        notifier = ChangeNotifier()
        calls = []
        holder = {}

        def once():
            calls.append("once")
            holder["sub"].unsubscribe()

        holder["sub"] = notifier.subscribe(once)
        notifier.notify()
        notifier.notify()

        assert calls == ["once"]

    def test_same_callable_subscribed_twice(self):
        """Each subscription is independent, even for the same function."""
        notifier = ChangeNotifier()
        calls = []

        def listener():
            calls.append(1)

        first = notifier.subscribe(listener)
        notifier.subscribe(listener)
        first.unsubscribe()
        notifier.notify()

        assert calls == [1]
