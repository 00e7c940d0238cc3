"""Tests for TmuxClient."""

from unittest.mock import AsyncMock, patch

import pytest

from termresurrect.adapters.tmux.client import TmuxClient, ratio_to_percent, session_name_for


class TestRatioToPercent:
    """Tests for ratio_to_percent."""

    @pytest.mark.parametrize(
        "ratio,percent",
        [(0.5, 50), (38 / 79, 48), (0.001, 1), (1.0, 99), (0.996, 99)],
    )
    def test_conversion(self, ratio, percent):
        assert ratio_to_percent(ratio) == percent


class TestTmuxClient:
    """Tests for TmuxClient class."""

    def test_init_default(self):
        """Test TmuxClient initialization with defaults."""
        client = TmuxClient()
        assert client._socket_path is None

    def test_init_with_socket(self):
        """Test TmuxClient initialization with custom socket."""
        client = TmuxClient(socket_path="/tmp/tmux-test/default")
        assert client._socket_path == "/tmp/tmux-test/default"

    @pytest.mark.asyncio
    async def test_run_success(self):
        """Test running tmux command successfully."""
        client = TmuxClient()

        with patch("asyncio.create_subprocess_exec", new_callable=AsyncMock) as mock_exec:
            mock_proc = AsyncMock()
            mock_proc.communicate.return_value = (b"output\n", b"")
            mock_proc.returncode = 0
            mock_exec.return_value = mock_proc

            result = await client.run("list-sessions")

            assert result == "output\n"
            call_args = mock_exec.call_args[0]
            assert call_args[0] == "tmux"
            assert "list-sessions" in call_args

    @pytest.mark.asyncio
    async def test_run_with_socket(self):
        """Test running tmux command with socket path."""
        client = TmuxClient(socket_path="/tmp/test.sock")

        with patch("asyncio.create_subprocess_exec", new_callable=AsyncMock) as mock_exec:
            mock_proc = AsyncMock()
            mock_proc.communicate.return_value = (b"ok\n", b"")
            mock_proc.returncode = 0
            mock_exec.return_value = mock_proc

            await client.run("list-windows")

            call_args = mock_exec.call_args[0]
            assert call_args[1:3] == ("-S", "/tmp/test.sock")

    @pytest.mark.asyncio
    async def test_run_failure(self):
        """Test running tmux command that fails."""
        client = TmuxClient()

        with patch("asyncio.create_subprocess_exec", new_callable=AsyncMock) as mock_exec:
            mock_proc = AsyncMock()
            mock_proc.communicate.return_value = (b"", b"error: no server running\n")
            mock_proc.returncode = 1
            mock_exec.return_value = mock_proc

            result = await client.run("list-sessions")

            assert result is None

    @pytest.mark.asyncio
    async def test_run_missing_binary(self):
        """Test running tmux when the binary is not installed."""
        client = TmuxClient()

        with patch("asyncio.create_subprocess_exec", side_effect=FileNotFoundError("tmux")):
            assert await client.run("list-sessions") is None

    @pytest.mark.asyncio
    async def test_list_windows(self):
        """Test listing tmux windows."""
        client = TmuxClient()

        output = (
            "$0\tdev\t@0\tbash\t80\t24\t0\n"
            "$0\tdev\t@1\tvim\t80\t24\t1\n"
            "$1\tops\t@2\tzsh\t120\t30\t1\n"
        )
        with patch.object(client, "run", return_value=output):
            windows = await client.list_windows()

        assert len(windows) == 3
        assert windows[0] == {
            "session_id": "$0",
            "session_name": "dev",
            "window_id": "@0",
            "window_name": "bash",
            "width": 80,
            "height": 24,
            "active": False,
        }
        assert windows[1]["active"] is True
        assert windows[2]["session_name"] == "ops"

    @pytest.mark.asyncio
    async def test_list_windows_skips_malformed(self):
        client = TmuxClient()

        output = "$0\tdev\t@0\tbash\twide\t24\t0\n$0\tdev\n"
        with patch.object(client, "run", return_value=output):
            assert await client.list_windows() == []

    @pytest.mark.asyncio
    async def test_list_windows_empty(self):
        """Test listing windows when tmux returns nothing."""
        client = TmuxClient()

        with patch.object(client, "run", return_value=None):
            assert await client.list_windows() == []

    @pytest.mark.asyncio
    async def test_list_panes(self):
        """Test listing tmux panes."""
        client = TmuxClient()

        output = (
            "%0\t$0\t@0\t0\tbash\t0\t0\t40\t24\t1\t/home/user\tbash\t101\n"
            "%1\t$0\t@0\t1\tvim\t41\t0\t39\t24\t0\t/home/user/my project\tvim\t102\n"
            "%2\t$1\t@2\t0\tzsh\t0\t0\t120\t30\t1\t/tmp\tzsh\t\n"
        )
        with patch.object(client, "run", return_value=output):
            panes = await client.list_panes()

        assert len(panes) == 3
        assert panes[0] == {
            "pane_id": "%0",
            "session_id": "$0",
            "window_id": "@0",
            "pane_index": 0,
            "pane_name": "bash",
            "left": 0,
            "top": 0,
            "width": 40,
            "height": 24,
            "active": True,
            "path": "/home/user",
            "current_command": "bash",
            "pane_pid": 101,
        }
        assert panes[1]["left"] == 41
        assert panes[1]["path"] == "/home/user/my project"
        assert "pane_pid" not in panes[2]

    @pytest.mark.asyncio
    async def test_list_panes_empty(self):
        """Test listing panes when tmux returns nothing."""
        client = TmuxClient()

        with patch.object(client, "run", return_value=None):
            assert await client.list_panes() == []

    @pytest.mark.asyncio
    async def test_split_window_horizontal(self):
        """Test side-by-side split with size and cwd."""
        client = TmuxClient()

        with patch.object(client, "run", return_value="%5\n"):
            result = await client.split_window("%0", horizontal=True, percent=48, cwd="/srv")

            assert result == "%5"
            assert client.run.call_args[0] == (
                "split-window", "-h", "-t", "%0", "-l", "48%", "-c", "/srv",
                "-P", "-F", "#{pane_id}",
            )

    @pytest.mark.asyncio
    async def test_split_window_vertical_without_cwd(self):
        client = TmuxClient()

        with patch.object(client, "run", return_value="%6\n"):
            await client.split_window("%0", horizontal=False, percent=30)

            call_args = client.run.call_args[0]
            assert "-v" in call_args
            assert "-c" not in call_args

    @pytest.mark.asyncio
    async def test_split_window_failure(self):
        client = TmuxClient()

        with patch.object(client, "run", return_value=None):
            assert await client.split_window("%0", True, 50) is None

    @pytest.mark.asyncio
    async def test_has_session(self):
        client = TmuxClient()

        with patch.object(client, "run", return_value=""):
            assert await client.has_session("dev") is True
            assert client.run.call_args[0] == ("has-session", "-t", "=dev")

        with patch.object(client, "run", return_value=None):
            assert await client.has_session("dev") is False

    @pytest.mark.asyncio
    async def test_new_session(self):
        client = TmuxClient()

        with patch.object(client, "run", return_value="dev\t@3\t%7\n"):
            result = await client.new_session("dev", cwd="/home/user")

            assert result == ("dev", "@3", "%7")
            call_args = client.run.call_args[0]
            assert call_args[:4] == ("new-session", "-d", "-s", "dev")
            assert "/home/user" in call_args

    @pytest.mark.asyncio
    async def test_new_window(self):
        client = TmuxClient()

        with patch.object(client, "run", return_value="dev\t@4\t%8\n"):
            result = await client.new_window("dev")

            assert result == ("dev", "@4", "%8")
            assert client.run.call_args[0][:3] == ("new-window", "-t", "dev:")

    def test_session_name_for(self):
        assert session_name_for("my.proj") == "my_proj"
        assert session_name_for("a:b") == "a_b"
        assert session_name_for("dev") == "dev"

    @pytest.mark.asyncio
    async def test_new_window_unexpected_output(self):
        client = TmuxClient()

        with patch.object(client, "run", return_value="garbage\n"):
            assert await client.new_window("dev") is None

    @pytest.mark.asyncio
    async def test_select_pane_success(self):
        """Test selecting/activating a pane."""
        client = TmuxClient()

        with patch.object(client, "run", return_value=""):
            result = await client.select_pane("%0")

            assert result is True
            client.run.assert_called_once()
            call_args = client.run.call_args[0]
            assert "select-pane" in call_args
            assert "%0" in call_args

    @pytest.mark.asyncio
    async def test_select_pane_failure(self):
        """Test selecting pane that doesn't exist."""
        client = TmuxClient()

        with patch.object(client, "run", return_value=None):
            assert await client.select_pane("%99") is False

    @pytest.mark.asyncio
    async def test_get_pane_field(self):
        client = TmuxClient()

        with patch.object(client, "run", return_value="1\n"):
            assert await client.get_pane_field("%0", "#{pane_active}") == "1"
            assert client.run.call_args[0] == (
                "display-message", "-t", "%0", "-p", "#{pane_active}"
            )

        with patch.object(client, "run", return_value=None):
            assert await client.get_pane_field("%99", "#{pane_active}") is None

    @pytest.mark.asyncio
    async def test_rename_pane(self):
        """Test renaming a pane."""
        client = TmuxClient()

        with patch.object(client, "run", return_value=""):
            result = await client.rename_pane("%0", "my-pane")

            assert result is True
            call_args = client.run.call_args[0]
            assert "select-pane" in call_args
            assert "-T" in call_args
            assert "my-pane" in call_args

    @pytest.mark.asyncio
    async def test_send_keys(self):
        """Text is sent literally, then Enter."""
        client = TmuxClient()

        with patch.object(client, "run", return_value=""):
            assert await client.send_keys("%0", "vim notes.md") is True

            calls = [c[0] for c in client.run.call_args_list]
            assert calls == [
                ("send-keys", "-t", "%0", "-l", "vim notes.md"),
                ("send-keys", "-t", "%0", "Enter"),
            ]

    @pytest.mark.asyncio
    async def test_send_keys_failure(self):
        client = TmuxClient()

        with patch.object(client, "run", return_value=None):
            assert await client.send_keys("%0", "ls") is False
            client.run.assert_called_once()
