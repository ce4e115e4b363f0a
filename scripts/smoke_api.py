import sys
import requests


def smoke(email, password, quiz_id, api_base='http://127.0.0.1:8000/api'):
    """Log in, start an attempt of a quiz and submit the first option of every question"""
    r = requests.post(f"{api_base}/trainer/auth/login/", json={'email': email, 'password': password})
    print('login status', r.status_code)
    r.raise_for_status()
    headers = {'Authorization': f"Token {r.json()['token']}"}

    r = requests.post(f"{api_base}/trainee/quizzes/{quiz_id}/start/", headers=headers)
    print('start status', r.status_code)
    r.raise_for_status()
    started = r.json()

    answers = [
        {'questionId': q['id'], 'optionIds': [q['options'][0]['id']] if q['options'] else []}
        for q in started['questions']
    ]
    r = requests.post(
        f"{api_base}/trainee/quizzes/{quiz_id}/submit/",
        headers=headers,
        json={'attemptId': started['attempt']['id'], 'answers': answers},
    )
    print('submit status', r.status_code)
    print(r.json())


if __name__ == '__main__':
    if len(sys.argv) < 4:
        print('Usage: python smoke_api.py email password quiz_id [api_base]')
        sys.exit(1)
    api = sys.argv[4] if len(sys.argv) > 4 else 'http://127.0.0.1:8000/api'
    smoke(sys.argv[1], sys.argv[2], sys.argv[3], api)
