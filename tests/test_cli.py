import geoproof.__main__ as cli

BISECTED_BASE = '''problem "Bisected base"
points A(0, 4), C(0, 0), F(-3, 0), B(3, 0)
triangle A-C-F
triangle A-C-B
segment F-B
given bisects A-C F-B
prove congruent F-C C-B
'''


def test_main_prints_traceback(tmp_path, capsys):
    path = tmp_path / 'bisected.gp'
    path.write_text(BISECTED_BASE, encoding='utf-8')

    code = cli.main([str(path)])

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out[0] == 'Bisected base'
    assert out[1] == 'Proved: yes'
    assert out[2] == '1. AC bisects FB (Given)'
    assert out[3].startswith('2. C is the midpoint of FB')
    assert len(out) == 5


def test_main_reports_unproved_goal(tmp_path, capsys):
    path = tmp_path / 'isosceles.gp'
    path.write_text(
        'points A, B, C\ntriangle ABC\ngiven congruent AB AC\nprove congruent AB BC\n',
        encoding='utf-8',
    )

    code = cli.main([str(path), '--no-preprocess'])

    assert code == 1
    assert capsys.readouterr().out == 'Proved: no\n'


def test_main_show_program_and_epsilon(tmp_path, capsys, monkeypatch):
    path = tmp_path / 'right.gp'
    path.write_text('points A, B, C\ntriangle ABC\ngiven right <ABC\nprove right <CBA\n', encoding='utf-8')
    seen = []
    solve_problem = cli.solve_problem

    def _solve_problem(problem, config=None, preprocess=True):
        seen.append((config.epsilon, preprocess))
        return solve_problem(problem, config=config, preprocess=preprocess)

    monkeypatch.setattr(cli, 'solve_problem', _solve_problem)

    code = cli.main([str(path), '--show-program', '--epsilon', '0.01'])

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out[:4] == ['points A, B, C', 'triangle A-B-C', 'given right <A-B-C', 'prove right <C-B-A']
    assert out[4] == 'Proved: yes'
    assert seen == [(0.01, True)]
