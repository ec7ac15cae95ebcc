import unittest

from delivery.events.Event_Bus import DELIVERY_CANCELLED, EventBus
from delivery.events.event_helpers import publish_delivery_cancelled


class TestEventBus(unittest.TestCase):

    def test_subscribe_once_and_unsubscribe(self):
        bus = EventBus()
        received = []

        def on_cancel(name, payload):
            received.append(payload['dates'])

        bus.subscribe(DELIVERY_CANCELLED, on_cancel)
        bus.subscribe(DELIVERY_CANCELLED, on_cancel)
        publish_delivery_cancelled(bus, 'c1', 'o1', ['2026-01-14'], '2026-02-02', 1)
        self.assertEqual(received, [['2026-01-14']])

        bus.unsubscribe(DELIVERY_CANCELLED, on_cancel)
        bus.unsubscribe(DELIVERY_CANCELLED, on_cancel)
        publish_delivery_cancelled(bus, 'c1', 'o1', ['2026-01-15'], '2026-02-03', 2)
        self.assertEqual(len(received), 1)

    def test_failing_subscriber_isolated(self):
        bus = EventBus()
        received = []

        def broken(name, payload):
            raise ValueError('boom')

        bus.subscribe(DELIVERY_CANCELLED, broken)
        bus.subscribe(DELIVERY_CANCELLED, lambda name, payload: received.append(name))
        with self.assertLogs('delivery.events.Event_Bus', level='ERROR'):
            bus.publish(DELIVERY_CANCELLED, {})
        self.assertEqual(received, [DELIVERY_CANCELLED])

    def test_helpers_without_bus(self):
        self.assertIsNone(publish_delivery_cancelled(None, 'c1', 'o1', [], '2026-01-30', 0))


if __name__ == '__main__':
    unittest.main()
