import example


def test_example_prints_mediator_and_stock_updates(capsys, monkeypatch):
    monkeypatch.delenv("DISPATCH_ERROR_POLICY", raising=False)
    example.main()
    out = capsys.readouterr().out
    assert "foo bar" in out
    assert out.count("StockUpdater with") == 2
    assert out.count("StockCharts with") == 2
