import os
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from src.banlist.consumer import InMemoryBanList
from src.banlist.service import BanlistService
from src.banlist.updater import RefreshOutcome
from src.shared.config_schema import UpdaterConfig


def make_response(chunks):
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.iter_content.side_effect = lambda chunk_size: iter(chunks)
    return response


class TestBanlistService(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.config_path = os.path.join(self.tmpdir.name, "config.yml")
        self.patcher_get = patch("src.banlist.fetcher.requests.get")
        self.mock_get = self.patcher_get.start()
        self.addCleanup(self.patcher_get.stop)
        self.mock_get.return_value = make_response([b"v1\nentryA\nentryB"])

    def make_service(self, **config):
        config.setdefault("banlist_url", "http://example.com/ubl")
        config.setdefault("retries", 1)
        service = BanlistService(
            os.path.join(self.tmpdir.name, "data"),
            config_path=self.config_path,
            consumer=InMemoryBanList(),
            config=UpdaterConfig(**config),
        )
        self.addCleanup(service.disable)
        return service

    def test_enable_refreshes_immediately(self):
        service = self.make_service(auto_check_interval=0)
        future = service.enable()
        self.assertEqual(future.result(timeout=2), RefreshOutcome.NETWORK)
        service.serial_executor.flush(timeout=2)
        self.assertEqual(service.consumer.header, "v1")
        self.assertEqual(service.consumer.entries, ("entryA", "entryB"))
        self.assertEqual(service.backup.load(), "v1\nentryA\nentryB")

    def test_enable_schedules_periodic_refresh(self):
        service = self.make_service(auto_check_interval=10)
        with patch.object(service.scheduler, "schedule") as mock_schedule:
            service.enable().result(timeout=2)
        mock_schedule.assert_called_once_with(600)

    def test_zero_interval_disables_auto_refresh(self):
        service = self.make_service(auto_check_interval=0)
        service.enable().result(timeout=2)
        self.assertFalse(service.scheduler.scheduled)

    def test_disable_cancels_schedule(self):
        service = self.make_service(auto_check_interval=10)
        service.enable().result(timeout=2)
        self.assertTrue(service.scheduler.scheduled)
        service.disable()
        self.assertFalse(service.is_enabled())
        self.assertFalse(service.scheduler.scheduled)

    def test_enable_after_disable_refreshes_again(self):
        service = self.make_service(auto_check_interval=10)
        service.enable().result(timeout=2)
        service.disable()
        self.mock_get.return_value = make_response([b"v2\nentryC"])
        future = service.enable()
        self.assertTrue(service.is_enabled())
        self.assertTrue(service.scheduler.scheduled)
        self.assertEqual(future.result(timeout=2), RefreshOutcome.NETWORK)
        service.serial_executor.flush(timeout=2)
        self.assertEqual(service.consumer.header, "v2")
        self.assertEqual(service.consumer.entries, ("entryC",))

    def test_refresh_after_disable_does_not_apply(self):
        service = self.make_service(auto_check_interval=0)
        self.assertFalse(service.is_enabled())
        self.assertEqual(service.updater.run(), RefreshOutcome.DISABLED)
        self.assertEqual(len(service.consumer), 0)

    def test_loads_config_file_when_not_given(self):
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write("banlist-url: http://example.com/ubl\nauto-check-interval: 0\n")
        service = BanlistService(
            os.path.join(self.tmpdir.name, "data"), config_path=self.config_path
        )
        self.addCleanup(service.disable)
        self.assertEqual(service.config.banlist_url, "http://example.com/ubl")
        self.assertIsInstance(service.consumer, InMemoryBanList)

    def test_reload_applies_new_settings(self):
        service = self.make_service(auto_check_interval=0)
        service.enable().result(timeout=2)
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write("banlist-url: http://example.org/ubl\nauto-check-interval: 5\n")
        with patch.object(service.scheduler, "schedule") as mock_schedule:
            self.assertTrue(service.reload())
        self.assertEqual(service.config.banlist_url, "http://example.org/ubl")
        mock_schedule.assert_called_once_with(300)

    def test_reload_keeps_old_config_on_error(self):
        service = self.make_service()
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write("timeout: [not, a, number]\n")
        with self.assertLogs("src.banlist.service", level="ERROR"):
            self.assertFalse(service.reload())
        self.assertEqual(service.config.banlist_url, "http://example.com/ubl")


if __name__ == "__main__":
    unittest.main()
