"""
Tests for logging setup and configuration utilities.

测试日志设置和配置工具功能。
"""

import pytest
import logging
from pathlib import Path
from unittest.mock import Mock, patch

from conflux.infrastructure.config.models import LoggingConfig
from conflux.infrastructure.logging.setup import (
    InterceptHandler,
    LoggingManager,
    setup_logging,
)


class TestSetupLogging:
    """测试日志设置主函数"""

    @patch('conflux.infrastructure.logging.setup.logging.basicConfig')
    @patch('conflux.infrastructure.logging.setup.loguru_logger')
    def test_console_only(self, mock_logger: Mock, mock_basic_config: Mock) -> None:
        """测试仅控制台输出"""
        setup_logging(LoggingConfig(level="debug"))

        mock_logger.remove.assert_called_once()
        mock_logger.add.assert_called_once()
        assert mock_logger.add.call_args.kwargs['level'] == "DEBUG"
        handlers = mock_basic_config.call_args.kwargs['handlers']
        assert isinstance(handlers[0], InterceptHandler)

    @patch('conflux.infrastructure.logging.setup.logging.basicConfig')
    @patch('conflux.infrastructure.logging.setup.loguru_logger')
    def test_file_sink(self, mock_logger: Mock, mock_basic_config: Mock, tmp_path: Path) -> None:
        """测试文件日志输出"""
        log_dir = tmp_path / "logs"
        config = LoggingConfig(
            console_enabled=False,
            file_enabled=True,
            log_directory=str(log_dir),
            max_file_size="1MB",
            backup_count=3
        )

        setup_logging(config)

        assert log_dir.is_dir()
        mock_logger.add.assert_called_once()
        sink = mock_logger.add.call_args.args[0]
        kwargs = mock_logger.add.call_args.kwargs
        assert sink == log_dir / "conflux.log"
        assert kwargs['rotation'] == "1MB"
        assert kwargs['retention'] == 3

    @patch('conflux.infrastructure.logging.setup.logging.basicConfig')
    @patch('conflux.infrastructure.logging.setup.loguru_logger')
    def test_no_sinks(self, mock_logger: Mock, mock_basic_config: Mock) -> None:
        setup_logging(LoggingConfig(console_enabled=False, file_enabled=False))

        mock_logger.remove.assert_called_once()
        mock_logger.add.assert_not_called()


class TestInterceptHandler:
    """测试标准库日志转发"""

    @patch('conflux.infrastructure.logging.setup.loguru_logger')
    def test_forwards_record(self, mock_logger: Mock) -> None:
        mock_logger.level.return_value.name = "WARNING"
        handler = InterceptHandler()
        record = logging.LogRecord(
            "conflux.test", logging.WARNING, __file__, 1, "scan %s failed", ("s1",), None
        )

        handler.emit(record)

        mock_logger.opt.return_value.log.assert_called_once_with("WARNING", "scan s1 failed")

    @patch('conflux.infrastructure.logging.setup.loguru_logger')
    def test_unknown_level_uses_number(self, mock_logger: Mock) -> None:
        mock_logger.level.side_effect = ValueError("unknown level")
        handler = InterceptHandler()
        record = logging.LogRecord("conflux.test", 15, __file__, 1, "custom", (), None)
        record.levelname = "CUSTOM"

        handler.emit(record)

        mock_logger.opt.return_value.log.assert_called_once_with(15, "custom")


class TestLoggingManager:
    """测试日志管理器组件"""

    def test_identity(self) -> None:
        manager = LoggingManager({})

        assert manager.name == "LoggingManager"
        assert manager.version == "1.0.0"
        assert manager.config.level == "INFO"

    @pytest.mark.asyncio
    @patch('conflux.infrastructure.logging.setup.setup_logging')
    async def test_start_stop(self, mock_setup: Mock) -> None:
        manager = LoggingManager({"level": "DEBUG"})

        await manager.start()
        await manager.start()
        health = await manager.check_health()
        await manager.stop()

        mock_setup.assert_called_once_with(manager.config)
        assert health['status'] == 'running'
        assert health['details']['log_level'] == "DEBUG"
        assert (await manager.check_health())['status'] == 'stopped'

    @pytest.mark.asyncio
    @patch('conflux.infrastructure.logging.setup.setup_logging')
    async def test_configure_reapplies_when_started(self, mock_setup: Mock) -> None:
        manager = LoggingManager({})
        await manager.configure({"level": "ERROR"})
        mock_setup.assert_not_called()

        await manager.start()
        await manager.configure({"level": "WARNING"})

        assert mock_setup.call_count == 2
        assert manager.config.level == "WARNING"
