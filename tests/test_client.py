import io

from ppledger.client import Client, main


def test_connect_marks_connected():
    client = Client()
    assert client.is_connected() is False
    assert client.connect("localhost", 9000) is True
    assert client.is_connected() is True


def test_disconnect_clears_state():
    client = Client()
    client.connect("localhost", 9000)
    client.disconnect()
    assert client.is_connected() is False
    client.disconnect()
    assert client.is_connected() is False


def test_client_logger_name():
    assert Client().logger_name == "client"


def test_main_without_arguments_fails(capsys):
    status = main([])
    captured = capsys.readouterr()
    assert status == 1
    assert "Error: Host and port required." in captured.err
    assert "Usage: pp-ledger-client <host> <port>" in captured.out


def test_main_with_only_host_fails(capsys):
    status = main(["localhost"])
    captured = capsys.readouterr()
    assert status == 1
    assert "Host and port required" in captured.err


def test_main_invalid_port_fails(capsys):
    status = main(["localhost", "abc"])
    captured = capsys.readouterr()
    assert status == 1
    assert "abc" in captured.err


def test_main_connects_and_logs(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO("\n"))
    status = main(["localhost", "9000"])
    captured = capsys.readouterr()
    assert status == 0
    assert "Press Enter to disconnect..." in captured.out
    assert "PP-Ledger Client v1.0.0" in captured.out
    log_text = (tmp_path / "client.log").read_text(encoding="utf-8")
    assert "Connecting to localhost:9000" in log_text
    assert "Connected successfully" in log_text
    assert "Disconnected" in log_text
    assert "[INFO] [client]" in log_text