from bolao import create_app, db
from bolao.models import Match, Pick, Player, Round

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "Player": Player,
        "Round": Round,
        "Match": Match,
        "Pick": Pick,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
