def step(agent, acceleration, dt):
    """
    Explicit Euler step.

    Forces are per-frame impulses, so velocity takes the acceleration
    as-is and only the position update is scaled by dt. No speed cap.
    """
    agent.velocity = agent.velocity + acceleration
    agent.position = agent.position + agent.velocity * dt
