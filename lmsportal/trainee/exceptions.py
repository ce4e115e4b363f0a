"""
Errors raised by the learner services and translated into HTTP responses by the views
"""


class QuizSubmissionError(Exception):
    """Base class for rejected quiz submissions (reported as 400)"""
    message = 'Invalid quiz submission'

    def __init__(self, message=None):
        super().__init__(message or self.message)


class AttemptNotFound(QuizSubmissionError):
    message = 'Attempt not found'


class AttemptOwnerMismatch(QuizSubmissionError):
    message = 'Invalid attempt - user mismatch'


class AttemptQuizMismatch(QuizSubmissionError):
    message = 'Invalid attempt - quiz mismatch'


class AttemptAlreadySubmitted(QuizSubmissionError):
    message = 'Attempt already submitted'


class QuizStartError(Exception):
    """Quiz attempt could not be started; carries the HTTP status to report"""
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
