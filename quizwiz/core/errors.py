# quizwiz/core/errors.py


class QuizError(Exception):
    """
    Base class for every error the core surfaces to callers.
    `status_code` is the HTTP status the API layer answers with.
    """

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ----------------------------------------------------------------------
# Caller errors
# ----------------------------------------------------------------------
class AnswerShapeMismatch(QuizError):
    status_code = 400

    def __init__(self, expected: str, received: str):
        super().__init__(f"Answer type mismatch: expected '{expected}', got '{received}'")
        self.expected = expected
        self.received = received


class UnsupportedEvaluationCombination(QuizError):
    status_code = 400

    def __init__(self, subject: str, answer_type: str):
        super().__init__(f"No evaluator for subject '{subject}' with answer type '{answer_type}'")
        self.subject = subject
        self.answer_type = answer_type


class InvalidHintCount(QuizError):
    status_code = 400


class InvalidQuestion(QuizError):
    status_code = 400


class InvalidTimeSpent(QuizError):
    status_code = 400


class SessionNotFound(QuizError):
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class QuestionNotFound(QuizError):
    status_code = 404

    def __init__(self, session_id: str, question_id: str):
        super().__init__(f"Question {question_id} not found in session {session_id}")
        self.session_id = session_id
        self.question_id = question_id


class InvalidTransition(QuizError):
    status_code = 400

    def __init__(self, action: str, status: str):
        super().__init__(f"Cannot {action} a session that is {status}")
        self.action = action
        self.status = status


class AnswerAlreadySubmitted(QuizError):
    status_code = 409

    def __init__(self, question_id: str):
        super().__init__(f"Question {question_id} has already been answered")
        self.question_id = question_id


# ----------------------------------------------------------------------
# Consistency errors (retryable by the caller)
# ----------------------------------------------------------------------
class SessionConflict(QuizError):
    status_code = 409
    retryable = True

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} was modified concurrently, retry the request")
        self.session_id = session_id
