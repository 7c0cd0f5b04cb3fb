"""Simulate a student answering problems with a ~75% correct rate."""
import random

import requests

BASE_URL = 'http://localhost:5002'
ROUNDS = 3
PER_ROUND = 20


def answer_problem(http, session_id, problem):
    """Answer one problem: right 75% of the time, at a random pace."""
    allotted = problem['time_allotted']
    elapsed = round(allotted * random.uniform(0.25, 1.1), 2)
    payload = {
        'tags': problem['tags'],
        'elapsed': elapsed,
        'allotted': allotted,
    }
    if elapsed > allotted:
        payload['skipped'] = True
    elif random.random() < 0.75:
        payload['answer'] = str(problem['answer'])
        payload['expected'] = problem['answer']
    else:
        payload['answer'] = str(problem['answer'] + random.choice([-2, -1, 1, 2]))
        payload['expected'] = problem['answer']
    resp = http.post(f'{BASE_URL}/session/{session_id}/answer', json=payload)
    resp.raise_for_status()
    return resp.json()


def main():
    http = requests.Session()

    print('Starting session...')
    resp = http.post(f'{BASE_URL}/session/start',
                     json={'tenure_days': 10, 'aptitude': 5})
    resp.raise_for_status()
    session_id = resp.json()['session_id']
    print(f'Session ID: {session_id}')

    for round_no in range(1, ROUNDS + 1):
        resp = http.post(f'{BASE_URL}/session/{session_id}/generate',
                         json={'count': PER_ROUND})
        resp.raise_for_status()
        problems = resp.json()['problems']

        correct = 0
        for i, problem in enumerate(problems, 1):
            result = answer_problem(http, session_id, problem)
            correct += result['is_correct']
            print(f"R{round_no} Q{i:02d} [{problem['difficulty']:>8}] "
                  f"{problem['display']:<22} {problem['time_allotted']:>4}s  "
                  f"{'Correct' if result['is_correct'] else 'Wrong'}  "
                  f"modifier={result['tier_modifier']:+d}")
        print(f'Round {round_no}: {correct}/{len(problems)} correct\n')

    report = http.get(f'{BASE_URL}/session/{session_id}/report').json()
    print('=== Report ===')
    print(f"Weakest tag:       {report['weakest_tag'] or '-'}")
    print(f"Most missed tag:   {report['most_missed_tag'] or '-'}")
    print(f"Aptitude estimate: {report['aptitude_estimate']}")
    for tag, stats in sorted(report['type_stats'].items()):
        print(f"  {tag:<15} {stats['correct']}/{stats['attempts']}  "
              f"avg {stats['avg_solve_time']:.2f}s")

    http.delete(f'{BASE_URL}/session/{session_id}')


if __name__ == '__main__':
    main()
